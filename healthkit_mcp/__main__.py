"""Allow running as: python -m healthkit_mcp"""
import sys

from healthkit_mcp.cli.main import main

sys.exit(main())
