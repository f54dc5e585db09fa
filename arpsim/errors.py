"""
Exceptions raised by the ARP step simulator.
"""


class ConfigurationError(ValueError):
    """Raised when the topology handed to the simulator cannot drive the scenario."""
