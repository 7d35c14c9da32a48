import uuid

from rconf.core import Operation, Provider

from ._operation_parser import StoreOperationParser


class StoreProvider(Provider):
    def get_op_parser(
        self, operation: Operation | None
    ) -> StoreOperationParser:
        return StoreOperationParser(operation)

    def generate_etag(self) -> str:
        return str(uuid.uuid4())
