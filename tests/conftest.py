pytest_plugins = ["tests.fixtures.openai_fixtures"]
