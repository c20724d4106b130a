"""
Agents package for the Persona Dossier project.

This package groups the Gemini-backed orchestrator with its prompts and
response normalization.  Import `DossierAgent` directly from here:

```python
from agents import DossierAgent

agent = DossierAgent()
result = agent.analyze("Ada Lovelace, mathematician")
```
"""

from .dossier_agent import ConfigurationError, DossierAgent, DossierError, ProviderError  # noqa: F401

__all__ = ["ConfigurationError", "DossierAgent", "DossierError", "ProviderError"]
