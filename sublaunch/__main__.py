"""Run a program through the subprocess launcher: ``python -m sublaunch``.

Usage::

    python -m sublaunch --output-capture std -- python app.py --verbose
"""

from sublaunch.cli import main

if __name__ == "__main__":
    main()
