"""Run the SwiftTranslator verification suite.

    python verify_swifttranslator.py --mode manual            # refresh the browser to advance
    python verify_swifttranslator.py --headless --suite positive
    python verify_swifttranslator.py --url http://127.0.0.1:5000/ --headless   # local stub
"""

from swifttranslator_e2e.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
