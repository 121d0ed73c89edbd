"""
Utility functions for the cluster event sender
"""
import asyncio
import sys
from typing import Callable, Any


def hex_bytes(data: bytes | bytearray | memoryview) -> str:
    """Format bytes as a bracketed list of hex values for traffic dumps"""
    return f"[{', '.join(f'0x{b:02X}' for b in bytes(data))}]"


def run_with_keyboard_interrupt(main_func: Callable[[], Any]) -> None:
    """
    Run an async main function with graceful KeyboardInterrupt handling.

    Args:
        main_func: The async main function to run
    """
    try:
        asyncio.run(main_func())
    except KeyboardInterrupt:
        print("\n🛑 Interrupted by user (Ctrl+C)")
        sys.exit(0)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)
