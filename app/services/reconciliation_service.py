# app/services/reconciliation_service.py
"""
스토리지/메타데이터 불일치 점검

두 저장소 사이에 트랜잭션이 없어서 생기는 orphan 을 찾는다.
- orphan blob: 참조하는 사진 레코드가 없는 blob (insert 실패, 삭제 후 blob 삭제 실패)
- orphan record: blob 이 없는 사진 레코드
리포트만 만들고 삭제는 하지 않음 (정리는 운영자가 결정)
"""
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.models.photo import Photo
from app.services.couple_photo_service import COUPLE_PREFIX
from app.services.storage_service import ObjectStore
from app.core.logger import logger


@dataclass
class OrphanReport:
    orphan_blobs: list[str] = field(default_factory=list)
    orphan_records: list[str] = field(default_factory=list)  # photo id

    @property
    def is_consistent(self) -> bool:
        return not self.orphan_blobs and not self.orphan_records


def find_orphans(db: Session, storage: ObjectStore, prefix: str = "") -> OrphanReport:
    """갤러리 사진 기준 불일치 목록"""
    
    blob_names = {
        e.name for e in storage.list(prefix)
        if not e.name.startswith(COUPLE_PREFIX)
    }
    
    records = db.query(Photo.id, Photo.storage_path)\
        .filter(Photo.storage_path.startswith(prefix))\
        .all()
    referenced = {path for _, path in records}
    
    report = OrphanReport(
        orphan_blobs=sorted(blob_names - referenced),
        orphan_records=sorted(photo_id for photo_id, path in records if path not in blob_names)
    )
    
    if not report.is_consistent:
        logger.warning(
            f"불일치 발견 - orphan blob {len(report.orphan_blobs)}개, "
            f"orphan record {len(report.orphan_records)}개"
        )
    return report
