"""Domain layer: automation entities, value objects, enums, exceptions."""
