# Services package init
"""
ArtCritic Backend — Services Layer
===================================

Service Inventory:
    - VisionClient (abstract) / GeminiService: the critique itself
    - StyleClassifier: free text → canonical style label
    - ResourceRecommender (+ ResourceCatalog): category/keyword → learning resources
    - text_extraction: sections, improvements and suggestions from the critique
    - image_processor: resize/re-encode before the vision call
    - FileService: upload validation and storage
    - PersistenceClient: artwork data service over HTTP
    - AnalysisService: orchestrates one analysis using all of the above
"""
