pytest_plugins = ["pgspatial.testing.pytest"]
