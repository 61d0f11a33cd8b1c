"""Resource aggregators: fetch related records and render one report per URI."""
