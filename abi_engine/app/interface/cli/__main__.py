import inspect
import json
import logging
from typing import Any, Callable, List, Optional

import typer
from dotenv import load_dotenv
from InquirerPy import inquirer

from abi_engine.app.config import settings
from abi_engine.app.domain.errors import AbiError
from abi_engine.app.interface.tasks import TASKS
from abi_engine.app.interface.tasks.codec.decode_task import decode_task
from abi_engine.app.interface.tasks.codec.encode_task import encode_task
from abi_engine.app.interface.tasks.codec.signature_task import signature_task
from abi_engine.app.interface.tasks.events.decode_log_task import decode_log_task
from abi_engine.app.interface.tasks.events.event_signatures_task import event_signatures_task


load_dotenv()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = typer.Typer()
abi_app = typer.Typer(help="cli for encoding and decoding Ethereum ABI data.")
app.add_typer(abi_app, name="abi")


def _execute(task: Callable[..., Any], **kwargs: Any) -> None:
    try:
        result = task(**kwargs)
    except (AbiError, FileNotFoundError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    if isinstance(result, str):
        typer.echo(result)
    else:
        typer.echo(json.dumps(result, indent=2))


@abi_app.command("signature")
def signature(sig: str = typer.Argument(..., help="e.g. 'transfer(address to, uint amount)'")) -> None:
    _execute(signature_task, signature=sig)


@abi_app.command("encode")
def encode(
    sig: str = typer.Argument(..., help="Function signature, e.g. 'baz(uint,address)'"),
    values: str = typer.Argument(..., help="JSON array of values, e.g. '[50, \"0x...\"]'"),
    call: bool = typer.Option(False, "--call", help="Prepend the 4-byte method id."),
) -> None:
    _execute(encode_task, signature=sig, values=values, call=call)


@abi_app.command("decode")
def decode(
    sig: str = typer.Argument(..., help="Function signature"),
    data: str = typer.Argument(..., help="0x-hex encoded data"),
    call: bool = typer.Option(False, "--call", help="Data starts with the 4-byte method id."),
) -> None:
    _execute(decode_task, signature=sig, data=data, call=call)


@abi_app.command("events")
def events(abi_path: str = typer.Argument(..., help="ABI JSON file (list or artifact)")) -> None:
    _execute(event_signatures_task, abi_path=abi_path)


@abi_app.command("decode-log")
def decode_log(
    abi_path: str = typer.Argument(..., help="ABI JSON file (list or artifact)"),
    topic: List[str] = typer.Option(..., "--topic", help="0x-hex topic; repeat in log order."),
    data: str = typer.Option("", "--data", help="0x-hex log data"),
) -> None:
    _execute(decode_log_task, abi_path=abi_path, topics=topic, data=data)


def _prompt(name: str, annotation: Any, default: Any) -> Any:
    has_default = default is not inspect.Parameter.empty
    if "bool" in str(annotation):
        return inquirer.confirm(message=f"{name}?", default=bool(default) if has_default else False).execute()

    raw = inquirer.text(
        message=f"{name}:",
        default="" if not has_default or default is None else str(default),
    ).execute()
    if "list" in str(annotation):
        return [part.strip() for part in raw.split(",") if part.strip()]
    return raw


@abi_app.command("run")
def run() -> None:
    task_name = inquirer.select(
        message="Select task:",
        choices=list(TASKS.keys()),
        pointer="❯",
        instruction="Use ↑/↓ to move, Enter to select",
    ).execute()

    task = TASKS[task_name]

    kwargs: dict[str, object] = {}
    for name, param in inspect.signature(task).parameters.items():
        kwargs[name] = _prompt(name, param.annotation, param.default)

    _execute(task, **kwargs)


def main(banner: Optional[bool] = True) -> None:
    if banner:
        LOGO = rf"""
      ___   ___ ___   ___            _
     / _ \ | _ )_ _| | __|_ _  __ _(_)_ _  ___
    | (_) || _ \| |  | _|| ' \/ _` | | ' \/ -_)
     \__,_||___/___| |___|_||_\__, |_|_||_\___|
                              |___/
      --- {settings.project_name} CLI ---
    """
        typer.echo(LOGO, err=True)
    app()


if __name__ == "__main__":
    main()
