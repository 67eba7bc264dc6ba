"""NetOps AI Core package"""

__version__ = "1.0.0"
__author__ = "NetOps AI Core Team"
__description__ = "Retrieval-augmented severity classification of network events using recent CVEs and watsonx.ai"
