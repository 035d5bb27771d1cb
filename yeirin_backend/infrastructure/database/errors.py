"""데이터베이스 계층 에러."""


class ConcurrentModificationError(Exception):
    """다른 요청이 먼저 애그리거트를 변경한 경우 발생하는 에러.

    Attributes:
        entity: 엔티티 이름 (예: ``CounselRequest``)
        entity_id: 엔티티 ID
        expected_version: 저장을 시도한 시점의 버전
    """

    def __init__(self, entity: str, entity_id: str, expected_version: int | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{entity} {entity_id}이(가) 다른 요청에 의해 변경되었습니다 "
            f"(expected_version={expected_version})"
        )
