"""
processor 패키지 — 본문 HTML 예측 테이블 추출·정리

파이프라인:
    레코드 소스 (processor.source)
        └─► processor.pipeline.TableExportPipeline.iter_rows()
                ├─ processor.extractor  매칭 테이블 탐색
                ├─ processor.sanitizer  속성 제거 → 언랩 → 직렬화 → 정규화
                └─ processor.dates      게시 시각 포맷
        └─► processor.export           CSV 싱크
"""
