"""Allow ``python -m devops_init``."""

from devops_init.initializer import main

main()
