from fs_analyser.cli import main


def run() -> None:
    raise SystemExit(main())
