"""HTTP surface for driving a TreeStore."""
