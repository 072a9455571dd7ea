"""AI Toolbox - workflow execution core.

Runs user-defined workflows of chat and transcription actions:
- Token templating between actions, dependency workflows and editor context
- Dependency workflows resolved as a graph with cycle detection
- Provider adapters for Azure OpenAI and OpenAI
"""

__version__ = "0.1.0"
