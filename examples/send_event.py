import argparse
import json
import logging

from colorama import Fore, Style

from clusterevent import ClusterEvent, EventSenderSession, load_config, run_with_keyboard_interrupt


def setup_logging(verbose: bool) -> logging.Logger:
    logger = logging.getLogger('ClusterEventSender')
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s.%(msecs)03d %(levelname)s: %(message)s', datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)
    return logger


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Send one JSON cluster event to a listener")
    ap.add_argument("name", help="Event name, e.g. fade_in")
    ap.add_argument("--config", default="examples/config.yaml", help="YAML config file (default: examples/config.yaml)")
    ap.add_argument("--type", default="custom", help="Event type (default: custom)")
    ap.add_argument("--category", default="", help="Event category")
    ap.add_argument("--parameters", default="{}", help="Event parameters as a JSON object, or a plain string")
    ap.add_argument("--host", help="Override the listener address from the config")
    ap.add_argument("--port", type=int, help="Override the listener port from the config")
    ap.add_argument("--traffic", action="store_true", help="Print every frame sent")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap.parse_args()


async def main():
    args = parse_args()
    logger = setup_logging(args.verbose)
    config = load_config(args.config)
    host = args.host or config.host
    port = args.port or config.port

    try:
        parameters = json.loads(args.parameters)
    except json.JSONDecodeError:
        parameters = args.parameters

    event = ClusterEvent(name=args.name, type=args.type, category=args.category, parameters=parameters)

    with EventSenderSession.from_config(config, logger=logger, print_traffic=args.traffic) as session:
        ok = await session.send_event_to_async(host, port, event,
                                               timeout=config.timeout,
                                               max_attempts=config.connect_attempts,
                                               retry_delay_ms=config.retry_delay_ms)

    if ok:
        print(Fore.GREEN + f"Sent {args.name} to {host}:{port}" + Style.RESET_ALL)
    else:
        print(Fore.RED + f"Failed to send {args.name} to {host}:{port}" + Style.RESET_ALL)


if __name__ == "__main__":
    run_with_keyboard_interrupt(main)
