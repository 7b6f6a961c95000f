# scripts/run_bot.py

"""Thin wrapper so the bot can be started as ``python scripts/run_bot.py``.

Requires the package to be importable (``pip install -e .``).
"""

from helios_bot.bot import run

if __name__ == '__main__':
    run()
