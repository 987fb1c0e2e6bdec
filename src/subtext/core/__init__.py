"""Engine core: tape, parsers, document model and derivations."""
