"""HTTP surface for StickyToDo automation clients."""
