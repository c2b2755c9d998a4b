"""
Entry point for the spread monitor.

Usage:
    python -m oraclearb --binance_ticker solusdt --pyth_price_id 0x...
    oraclearb  # if installed via pip
"""

import asyncio
import sys


# Try to use uvloop for better performance
try:
    import uvloop

    uvloop.install()
    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from pydantic import ValidationError

    from oraclearb import __version__
    from oraclearb.config.settings import load_settings
    from oraclearb.core.engine import ArbitrageMonitor
    from oraclearb.core.errors import StreamError

    # Print banner
    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     ORACLE SPREAD MONITOR v{__version__:<29}      ║
║                                                               ║
║     Binance bookTicker vs. Pyth oracle price                  ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )

    # Load settings
    try:
        settings = load_settings(True)
    except ValidationError as e:
        print(f"Configuration error: {e}")
        print("\nPass options as flags or environment variables, e.g.:")
        print("  --binance_ticker solusdt")
        print("  PYTH_PRICE_ID=0xef0d8b6fda2ceba41da15d4095d1da392a0d2f8ed0c6c7bc0f4cfac8c280b56d")
        return 1

    monitor = ArbitrageMonitor(settings)

    # Print configuration summary
    print("Configuration:")
    print(f"  Pair:           {settings.binance_ticker}")
    print(f"  Oracle feed:    {settings.pyth_price_id}")
    print(f"  Exchange:       {'Testnet' if settings.use_testnet else 'Production'}")
    print(f"  Taker fee:      {monitor.taker_fee * 100}%")
    print(f"  Oracle poll:    {settings.oracle_poll_interval_s:.3f}s")
    print(f"  Detection:      {settings.detection_interval_s:.3f}s")
    print(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
    print()

    # Run the monitor
    async def run_monitor() -> int:
        try:
            await monitor.setup()
            await monitor.run()
            return 0

        except StreamError as e:
            print(f"\nCould not start exchange stream: {e}")
            return 1

        except KeyboardInterrupt:
            print("\nInterrupted by user")
            return 0

        finally:
            await monitor.shutdown()

    return asyncio.run(run_monitor())


if __name__ == "__main__":
    sys.exit(main())
