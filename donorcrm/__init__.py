"""donorcrm: nonprofit CRM automation service (triggers, steps, executions)."""
