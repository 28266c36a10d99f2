"""StickyToDo task query and rule automation engine."""
