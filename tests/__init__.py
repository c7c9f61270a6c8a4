"""
appforge test suite
===================

Test Modules
------------
- test_models.py: Pydantic models and settings
- test_naming.py: npm name validation
- test_paths.py: Target directory checks
- test_descriptor.py: package.json synthesis
- test_installer.py: npm/yarn command lines and failure mapping
- test_materializer.py: Template copying and rename rules
- test_git.py: Repository initialization
- test_creator.py: End-to-end pipeline
- test_recovery.py: Retry state machine and exit codes
- test_cli.py: Command-line interface
- test_log.py: Log levels and output streams

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_recovery.py
"""
