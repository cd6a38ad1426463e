from download_sorter.cli.app import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
