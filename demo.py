#!/usr/bin/env python3
"""
Demo script for the errorformat matching system.
"""

import tempfile
from pathlib import Path

from errfmt import CompileError, KakouneSerializer, LineMatcher, compile_template
from errfmt.io_utils import JSONLWriter, JSONLReader


def create_sample_output():
    """Create sample PHP linter output, noise included."""
    return [
        "PHP Warning:  Undefined variable $user in /srv/app/index.php on line 12",
        "PHP Parse error:  syntax error, unexpected '}' in /srv/app/login.php on line 48",
        "Errors parsing /srv/app/login.php",
        "PHP Warning:  Division by zero in /srv/app/stats.php on line 7",
        "No syntax errors detected in /srv/app/stats.php",
    ]


def main():
    """Run the demo."""
    print("🚀 Errorformat Matching Demo")
    print("=" * 50)

    temp_dir = tempfile.mkdtemp()
    print(f"📁 Working in temporary directory: {temp_dir}")

    try:
        # Step 1: Compile the errorformat
        errfmt = "%k: %m in %f on line %l"
        template = compile_template(errfmt)
        print(f"\n🔧 Compiled errorformat: {errfmt}")
        for i, segment in enumerate(template.segments, 1):
            print(f"  {i:2}. {segment}")

        # Step 2: Show a rejected errorformat
        try:
            compile_template("%k: %m (%x)")
        except CompileError as e:
            print(f"\n⚠️  Rejected: {e}")

        # Step 3: Match sample output
        print("\n🎯 Matching sample linter output:")
        matcher = LineMatcher(template)
        sample_output = create_sample_output()

        diagnostics = []
        for i, line in enumerate(sample_output, 1):
            diagnostic = matcher.match(line)
            print(f"\n  {i}. Line: {line}")
            if diagnostic:
                diagnostics.append(diagnostic)
                print(f"     ✅ {diagnostic}")
            else:
                print(f"     ❌ No match (skipped)")

        # Step 4: Render for kakoune
        print("\n📤 Kakoune lint output:")
        print(KakouneSerializer().render_all(diagnostics))

        # Step 5: Save as JSONL and read back
        diagnostics_file = Path(temp_dir) / "diagnostics.jsonl"
        with JSONLWriter(str(diagnostics_file)) as writer:
            writer.write_diagnostics(diagnostics)
        loaded = JSONLReader(str(diagnostics_file)).read_diagnostics()
        print(f"\n💾 Saved and reloaded {len(loaded)} diagnostics from: {diagnostics_file.name}")

        # Summary
        print(f"\n📊 Matching Summary:")
        print(f"   • Total lines: {len(sample_output)}")
        print(f"   • Matched lines: {len(diagnostics)}")
        print(f"   • Match rate: {len(diagnostics)/len(sample_output)*100:.1f}%")

        print(f"\n🎉 Demo completed successfully!")

    finally:
        import shutil
        shutil.rmtree(temp_dir, ignore_errors=True)
        print(f"\n🧹 Cleaned up temporary directory")


if __name__ == '__main__':
    main()
