from draftdesk.domains.assets.services import AssetStore

__all__ = ["AssetStore"]
