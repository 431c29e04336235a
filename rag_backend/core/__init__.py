"""Domain core: exceptions, retry policy and vector math."""
