#!/usr/bin/env python3
"""
Run a ga_core evolution described by a YAML file.

Usage:
    python3 ga_cli.py [-v|--verbose] [--config] CONFIG.yaml

`-v` logs engine progress at INFO. The configuration layout is documented
in ga_core/config.py; ga_config.yaml is a ones-counting example.
"""

import logging
import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def main():
    """Main entry point for GA CLI."""
    args = sys.argv[1:]

    # Handle help
    if not args or args[0] in ['-h', '--help', 'help']:
        print(__doc__)
        sys.exit(0 if args else 1)

    level = logging.WARNING
    if args[0] in ['-v', '--verbose']:
        level = logging.INFO
        args = args[1:]
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    if not args:
        print("Error: missing configuration file")
        print(__doc__)
        sys.exit(1)

    # Parse config path
    config_path = args[0]

    if config_path.startswith('--config='):
        config_path = config_path.split('=', 1)[1]
    elif config_path == '--config':
        if len(args) < 2:
            print("Error: --config requires an argument")
            print(__doc__)
            sys.exit(1)
        config_path = args[1]

    # Import and run
    try:
        from ga_core.cli import run_from_config
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
