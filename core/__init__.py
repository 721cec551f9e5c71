"""Bot core: step engine, review controller and registration flow"""
