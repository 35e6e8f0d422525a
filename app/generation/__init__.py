# FILE: app/generation/__init__.py
"""
Site generation: prompt library, fallback templates, the two-stage
orchestrator, the SSE event protocol and the HTTP routes.

Import submodules directly (app.generation.orchestrator, ...); this package
stays empty so app.providers can import the prompt library without a cycle.
"""
