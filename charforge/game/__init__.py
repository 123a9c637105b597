"""
Character-creation rules for CharForge.

Pure, I/O-free logic: ability scores and modifiers, stat pool generation,
the assignment allocator, selection limits and the wizard state transitions.
"""
