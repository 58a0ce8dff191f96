"""CLI interface for Sahay"""

import sys
import time
import threading
import argparse
import logging
import textwrap
from colorama import init, Fore, Style

from .agent import SahayAgent
from .knowledge import KnowledgeStore, build_loader
from .responses import AdviceCard, CATEGORIES, WARN
from . import config
from . import __version__, __author__, __powered_by__

# Initialize colorama for Windows support
init(autoreset=True)

logger = logging.getLogger(__name__)


# ── Typewriter helper ────────────────────────────────────────────────────────
def _typewrite(text: str, color: str = Fore.WHITE, delay: float = 0.013, end: str = '\n'):
    """Print text with a typewriter effect, one character at a time."""
    if len(text) > 200:
        delay = 0.005
    sys.stdout.write(color)
    sys.stdout.flush()
    for ch in text:
        sys.stdout.write(ch)
        sys.stdout.flush()
        time.sleep(delay)
    sys.stdout.write(Style.RESET_ALL + end)
    sys.stdout.flush()


# ── Spinner ──────────────────────────────────────────────────────────────────
class _Spinner:
    """Animated braille spinner that runs in a background thread."""
    _FRAMES = ('⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏')

    def __init__(self, message: str, color: str = Fore.YELLOW):
        self.message = message
        self.color   = color
        self._stop   = threading.Event()
        self._thread = threading.Thread(target=self._spin, daemon=True)

    def _spin(self):
        i = 0
        while not self._stop.is_set():
            frame = self._FRAMES[i % len(self._FRAMES)]
            sys.stdout.write(
                f"\r{self.color}  {frame}  {self.message}{Style.RESET_ALL}   "
            )
            sys.stdout.flush()
            time.sleep(0.09)
            i += 1

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        self._thread.join()
        sys.stdout.write('\r' + ' ' * (len(self.message) + 14) + '\r')
        sys.stdout.flush()

    def __enter__(self):
        return self.start()

    def __exit__(self, *_):
        self.stop()


def format_card(card: AdviceCard, width: int = config.CLI_WIDTH) -> str:
    """Render an advice card as coloured terminal text."""
    border = Fore.YELLOW if card.type == WARN else Fore.GREEN
    icon = '⚠️ ' if card.type == WARN else 'ℹ️ '
    sep = f"{border}{'─' * (width - 2)}{Style.RESET_ALL}"

    title = f"{border + Style.BRIGHT}  {icon} {card.title}{Style.RESET_ALL}"
    if card.confidence is not None:
        title += f"  {Fore.CYAN}[{card.confidence}% confidence]{Style.RESET_ALL}"

    out = [sep, title, sep]
    for line in card.lines:
        if not line:
            out.append("")
            continue
        bullet = "  " if isinstance(card.content, str) or line.endswith(':') else "  • "
        wrapped = textwrap.wrap(line, width=width - len(bullet) - 2) or [line]
        out.append(f"{Fore.WHITE}{bullet}{wrapped[0]}{Style.RESET_ALL}")
        for cont in wrapped[1:]:
            out.append(f"{Fore.WHITE}{' ' * len(bullet)}{cont}{Style.RESET_ALL}")
    if card.tags:
        out.append("  " + " ".join(f"{Fore.MAGENTA}[{t}]{Style.RESET_ALL}" for t in card.tags))
    out.append(sep)
    return "\n".join(out)


class SahayCLI:
    """Interactive CLI for the Sahay agent"""

    def __init__(self, agent: SahayAgent = None, data_url: str = None, data_dir: str = None,
                 animate: bool = True):
        self.agent = agent
        self.data_url = data_url
        self.data_dir = data_dir
        self.animate = animate
        self.running = False

    def print_banner(self):
        """Print welcome banner with a subtle cascade-reveal effect."""
        W = 62

        def _row(label: str, value: str, vcol: str) -> str:
            inner = f"  {Fore.WHITE}{label}{vcol}{value}"
            pad   = W - 2 - len(label) - len(value)
            return f"{Fore.GREEN}║{inner}{' ' * max(pad, 0)}{Fore.GREEN}║{Style.RESET_ALL}"

        title_text = '·  S a h a y  ·'
        sub_text   = 'Offline Emergency, Health & Plant Advice'

        lines = [
            "",
            f"{Fore.GREEN}╔{'═' * W}╗{Style.RESET_ALL}",
            f"{Fore.GREEN}║{Fore.CYAN + Style.BRIGHT}{title_text:^{W}}{Style.RESET_ALL}{Fore.GREEN}║{Style.RESET_ALL}",
            f"{Fore.GREEN}║{Fore.YELLOW}{sub_text:^{W}}{Style.RESET_ALL}{Fore.GREEN}║{Style.RESET_ALL}",
            f"{Fore.GREEN}║{'─' * W}║{Style.RESET_ALL}",
            _row("Developed by  : ", __author__,    Fore.GREEN),
            _row("Powered by    : ", __powered_by__, Fore.CYAN),
            _row("Version       : ", f"v{__version__}", Fore.WHITE),
            f"{Fore.GREEN}╚{'═' * W}╝{Style.RESET_ALL}",
            f"{Fore.RED + Style.BRIGHT}  In an emergency call 112 first.{Style.RESET_ALL}",
            "",
        ]

        for line in lines:
            print(line)
            if self.animate:
                time.sleep(0.030)

    def print_help(self):
        bar = f"{Fore.CYAN}{'─' * 60}{Style.RESET_ALL}"
        print(f"\n{bar}")
        print(f"{Fore.CYAN + Style.BRIGHT}  Commands{Style.RESET_ALL}")
        print(bar)

        for cmd, desc in [
            ("cpr",          "CPR steps (brief, then detailed)"),
            ("contacts",     "Emergency phone numbers"),
            ("medical",      "General medical guidance"),
            ("plant",        "Common plant diseases & care"),
            ("women",        "PCOD/PCOS, menstrual care & wellness"),
            ("text",         "Switch to text input (default)"),
            ("voice",        "Speak your question"),
            ("image <path>", "Check whether a photo shows a plant"),
            ("camera",       "Open the camera for image mode"),
            ("capture",      "Take a snapshot and check it"),
            ("stats",        "Show knowledge base statistics"),
            ("version",      "Show version and credits"),
            ("quit",         "Exit the application"),
        ]:
            print(f"  {Fore.GREEN}{cmd:<14}{Style.RESET_ALL}{Fore.WHITE}{desc}{Style.RESET_ALL}")

        print(f"\n{Fore.CYAN + Style.BRIGHT}  Examples{Style.RESET_ALL}")
        for ex in [
            "I have a fever and headache",
            "irregular periods",
            "yellow spots on my tomato leaf",
        ]:
            print(f"  {Fore.YELLOW}›{Style.RESET_ALL} {ex}")
        print(f"{bar}\n")

    def print_card(self, card: AdviceCard):
        print()
        print(format_card(card))
        print()

    def print_error(self, error: str):
        print(f"\n{Fore.RED}  ✗  {error}{Style.RESET_ALL}\n")

    def get_input(self) -> str:
        try:
            prompt = (
                f"{Fore.LIGHTGREEN_EX}  ╰─{Style.RESET_ALL}"
                f"{Fore.LIGHTGREEN_EX + Style.BRIGHT} {config.CLI_PROMPT} [{self.agent.mode}] {Style.RESET_ALL}"
                f"{Fore.LIGHTGREEN_EX}›{Style.RESET_ALL} "
            )
            return input(prompt).strip()
        except (KeyboardInterrupt, EOFError):
            return "quit"

    def initialize_agent(self) -> bool:
        """Load the knowledge base behind a spinner."""
        if self.agent is not None:
            return True
        sp = _Spinner("Loading offline knowledge…", Fore.YELLOW).start() if self.animate else None
        try:
            self.agent = SahayAgent(loader=build_loader(self.data_url, self.data_dir))
        except Exception as e:
            if sp:
                sp.stop()
            self.print_error(f"Failed to initialize: {e}")
            logger.exception("Initialization error")
            return False
        if sp:
            sp.stop()
        print(f"{Fore.GREEN}  ✓  Ready!{Style.RESET_ALL}\n")
        print(self.agent.get_greeting())
        return True

    def handle_voice(self):
        result = self.agent.start_voice()
        if result is None:
            return
        if isinstance(result, AdviceCard):
            self.print_card(result)
            return
        print(f"{Fore.CYAN}  Heard: {Style.RESET_ALL}{result}")
        card = self.agent.submit(result)
        if card is not None:
            self.print_card(card)

    def handle_command(self, command: str):
        """
        Handle special commands.
        Returns True to continue, False to exit, None if not a command.
        """
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd in ('quit', 'exit', 'q'):
            if self.animate:
                _typewrite("\n  Stay safe! Goodbye. 👋", Fore.GREEN, delay=0.022)
                print()
            else:
                print(f"\n{Fore.GREEN}  Stay safe! Goodbye.{Style.RESET_ALL}\n")
            return False

        if cmd == 'help':
            self.print_help()
            return True

        if cmd == 'version':
            self.print_version()
            return True

        if cmd == 'stats':
            for key, value in self.agent.get_statistics().items():
                print(f"  {Fore.GREEN}{key:<14}{Style.RESET_ALL}{value}")
            print()
            return True

        if cmd == 'cpr':
            for card in self.agent.cpr():
                self.print_card(card)
            return True

        if cmd == 'contacts':
            self.print_card(self.agent.contacts())
            return True

        if cmd in CATEGORIES and not arg:
            self.print_card(self.agent.select_category(cmd))
            return True

        if cmd == 'text' and not arg:
            self.agent.set_mode('text')
            return True

        if cmd == 'voice' and not arg:
            self.handle_voice()
            return True

        if cmd == 'image':
            if arg:
                self.print_card(self.agent.identify_image(arg))
            else:
                self.agent.set_mode('image')
                print(f"{Fore.CYAN}  Image mode: give a path with 'image <path>' or use 'camera' then 'capture'.{Style.RESET_ALL}\n")
            return True

        if cmd == 'camera' and not arg:
            card = self.agent.start_camera()
            if card is not None:
                self.print_card(card)
            else:
                print(f"{Fore.GREEN}  ✓  Camera ready. Type 'capture' to take a snapshot.{Style.RESET_ALL}\n")
            return True

        if cmd == 'capture' and not arg:
            self.print_card(self.agent.capture_and_identify())
            return True

        return None  # Not a command

    def ask(self, query: str) -> bool:
        """Run a text search and print the card. False when nothing was searched."""
        card = self.agent.submit(query)
        if card is None:
            return False
        self.print_card(card)
        return True

    def run(self):
        """Main CLI loop."""
        self.print_banner()
        self.print_help()

        if not self.initialize_agent():
            return

        self.running = True
        try:
            while self.running:
                try:
                    user_input = self.get_input()
                    if not user_input:
                        continue

                    result = self.handle_command(user_input)
                    if result is False:
                        break
                    if result is True:
                        continue

                    self.ask(user_input)

                except KeyboardInterrupt:
                    print(f"\n{Fore.YELLOW}  Use 'quit' to exit.{Style.RESET_ALL}\n")
                except Exception as e:
                    self.print_error(f"Unexpected error: {e}")
                    logger.exception("Unexpected error in main loop")
        finally:
            self.agent.close()

    def print_version(self):
        print()
        print(f"{Fore.CYAN + Style.BRIGHT}  Sahay v{__version__}{Style.RESET_ALL}")
        print(f"  {Fore.GREEN}Developer : {__author__}{Style.RESET_ALL}")
        print(f"  {Fore.CYAN}Powered by: {__powered_by__}{Style.RESET_ALL}")
        print()


def main(argv=None):
    """Main entry point: supports --version, --about, --query and interactive mode"""
    parser = argparse.ArgumentParser(
        prog="sahay",
        description="Sahay — Offline Emergency, Health & Plant Advice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            f"Developed by: {__author__}\n"
            f"Powered by:   {__powered_by__}\n"
            f"Version:      {__version__}"
        ),
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"Sahay v{__version__}",
    )
    parser.add_argument(
        "--about",
        action="store_true",
        help="Show detailed about information and exit",
    )
    parser.add_argument("--data-url", help="Base URL serving <topic>.json datasets")
    parser.add_argument("--data-dir", help="Directory holding <topic>.json datasets")
    parser.add_argument("--query", "-q", help="Answer one question and exit")
    parser.add_argument("--image", help="Check one image file and exit")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("sahay").setLevel(logging.DEBUG)

    if args.about:
        print(f"{Fore.CYAN}Sahay{Style.RESET_ALL}")
        print("  Offline knowledge for emergencies, health, plants and women's health")
        print(f"  {Fore.GREEN}Version   : {__version__}{Style.RESET_ALL}")
        print(f"  {Fore.GREEN}Developer : {__author__}{Style.RESET_ALL}")
        print(f"  {Fore.BLUE}Powered by: {__powered_by__}{Style.RESET_ALL}")
        print(f"\n  Run {Fore.YELLOW}sahay{Style.RESET_ALL} to start the interactive assistant.")
        return 0

    if args.query is not None or args.image:
        agent = SahayAgent(KnowledgeStore.load(build_loader(args.data_url, args.data_dir)))
        cli = SahayCLI(agent=agent, animate=False)
        with agent:
            if args.image:
                cli.print_card(agent.identify_image(args.image))
            if args.query is not None and not cli.ask(args.query):
                cli.print_error("Please enter a question.")
                return 2
        return 0

    cli = SahayCLI(data_url=args.data_url, data_dir=args.data_dir)
    try:
        cli.run()
    except Exception as e:
        print(f"{Fore.RED}Fatal error: {e}{Style.RESET_ALL}")
        logging.exception("Fatal error")
        sys.exit(1)
    return 0


if __name__ == "__main__":
    sys.exit(main())
