"""User profile, address and credit-card types, address storage and service layers."""