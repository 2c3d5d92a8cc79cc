"""Pure building blocks: identifiers, the derangement engine, models and errors."""
