"""shop-near-u Backend Package — nearby shops, products and subscriptions.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
