# app/services/__init__.py
"""
Service layer. Routers stay thin and call into these modules:

- validators: profile field validation
- profiles: registration, login, profile updates
- connections: connection request engine and discovery feed
- chat: chat authorization, room ids, history and message persistence
- realtime: WebSocket join / send / leave fan-out
- notifications: best-effort email
- payments: membership orders
"""
