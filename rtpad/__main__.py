"""Allow running rtpad as a module: python -m rtpad"""

from rtpad.cli import main

main()
