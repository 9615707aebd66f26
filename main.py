from cdnlookup.cli.app import cli


def main():
    """Entry point for the cdnlookup CLI. Delegates to cdnlookup.cli.app:cli."""
    cli()


if __name__ == "__main__":
    main()
