pytest_plugins = [
    "fixtures.console",
    "fixtures.python",
    "fixtures.stacks",
]
