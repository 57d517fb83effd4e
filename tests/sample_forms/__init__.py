"""Form definitions shared by the test suite."""
