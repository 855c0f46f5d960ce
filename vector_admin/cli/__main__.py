"""Allow ``python -m vector_admin.cli`` execution."""

from vector_admin.cli.connectors import main

main()
