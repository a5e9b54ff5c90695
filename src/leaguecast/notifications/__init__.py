"""Push notifications — relay to an external messaging provider."""
