from canvas_uploader.upload.orchestrator import UploadOrchestrator
from canvas_uploader.upload.protocol import AssetUploadProtocol

__all__ = ["AssetUploadProtocol", "UploadOrchestrator"]
