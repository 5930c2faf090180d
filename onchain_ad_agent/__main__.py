import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .agent import build_session
from .config import AdAgentConfig
from .constants import AUTONOMOUS_INTERVAL_SECONDS
from .errors import AdAgentError, MissingEnvironmentError
from .logging_config import setup_logging
from .shell import choose_mode, run_autonomous_mode, run_chat_mode

logger = logging.getLogger("onchain_ad_agent")


def report_missing_environment(error: MissingEnvironmentError) -> None:
    print("Error: Required environment variables are not set", file=sys.stderr)
    for name in error.missing:
        print(f"{name}=your_{name.lower()}_here", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="On-chain Ad Strategist Agent")
    parser.add_argument("--mode", choices=["chat", "auto"], help="Skip the mode prompt")
    parser.add_argument("--interval", type=float, default=AUTONOMOUS_INTERVAL_SECONDS, help="Seconds between autonomous actions")
    parser.add_argument("--profile", type=str, help="Campaign profile name or JSON file")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging()

    try:
        config = AdAgentConfig.from_env()
    except MissingEnvironmentError as e:
        report_missing_environment(e)
        sys.exit(1)
    except AdAgentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.profile:
        config.profile = args.profile

    print("Starting Agent...")
    try:
        session = build_session(config)
    except Exception as e:
        logger.error(f"Failed to initialize agent: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        mode = args.mode or choose_mode()
    except EOFError:
        logger.error("No mode selected: input closed")
        session.close()
        sys.exit(1)

    try:
        if mode == "chat":
            run_chat_mode(session)
        else:
            run_autonomous_mode(session, interval=args.interval)
    finally:
        session.close()


if __name__ == "__main__":
    main()
