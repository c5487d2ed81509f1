"""
Wazuh agent provisioner — detect, download and install the Wazuh agent.
"""

__version__ = "0.1.0"
