"""Allow running the fixture CLI with python -m localstack_fixture."""

from localstack_fixture.cli import main

if __name__ == "__main__":
    main()
