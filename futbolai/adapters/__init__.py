# External data provider adapters (AI, stats, video)
