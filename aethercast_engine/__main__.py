"""CLI entrypoint for AetherCast Engine.

Usage:
    python -m aethercast_engine cast <script> [<script> ...] [--energy N]
"""

from aethercast_engine.cli import main

if __name__ == "__main__":
    main()
