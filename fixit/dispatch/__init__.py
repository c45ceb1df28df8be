"""Request dispatch: safety gate, intent, capability lookup, invocation, audit."""
