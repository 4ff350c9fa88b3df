# Search system
# Raw text → classification → reconciliation (AI / stats / video fan-out) → envelope
