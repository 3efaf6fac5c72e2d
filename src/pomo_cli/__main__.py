"""Allow ``python -m pomo_cli``; the daemon is spawned this way."""

from pomo_cli.main import main

if __name__ == "__main__":
    main()
