import argparse
import sys
from typing import Optional, Sequence, Tuple

from colorama import Fore, Style
from colorama import init as colorama_init

from pescabot.config import load_settings
from pescabot.game import FishingGame, create_game
from pescabot.log import setup_logger

DEFAULT_USER_ID = "console"
EXIT_WORDS = {"sair", "exit", "quit"}


def split_sender(line: str, default_user: str) -> Tuple[str, str]:
    """`@id texto` fala como outro usuário; sem prefixo usa o usuário padrão."""
    stripped = line.strip()
    if stripped.startswith("@"):
        sender, _, text = stripped[1:].partition(" ")
        if sender:
            return sender, text.strip()
    return default_user, stripped


def run_console(game: FishingGame, user_id: str) -> None:
    print(f"{Style.BRIGHT}{Fore.CYAN}Bot de pescaria conectado!{Style.RESET_ALL}")
    print("Digite /ajuda para ver os comandos ou 'sair' para encerrar.\n")

    while True:
        try:
            line = input(f"{Fore.GREEN}{user_id}> {Style.RESET_ALL}")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if line.strip().lower() in EXIT_WORDS:
            break

        sender, text = split_sender(line, user_id)
        reply = game.handle_command(sender, text)
        if reply:
            print(f"\n{reply}\n")
            sys.stdout.flush()

    print("Até a próxima pesca!")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Bot de pesca em modo console.")
    parser.add_argument("--user", default=DEFAULT_USER_ID, help="id do jogador padrão")
    args = parser.parse_args(argv)

    colorama_init()
    settings = load_settings()
    setup_logger(settings.log_level)
    game = create_game(settings)
    run_console(game, args.user)


if __name__ == "__main__":
    main()
