# the plugin is also registered through the pytest11 entry point under the same name
pytest_plugins = ["pytest_memorizer.plugin"]
