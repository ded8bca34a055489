from .store import HttpMetadataStore, MetadataStore, UploadReceipt

__all__ = ["HttpMetadataStore", "MetadataStore", "UploadReceipt"]
