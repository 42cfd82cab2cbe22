"""protoc plugin entry point (``protoc --webapi-ts_out=server,webapi_path=lib/webapi:out``)."""

from __future__ import annotations

import sys

from google.protobuf.compiler import plugin_pb2

from protoc_webapi_ts.errors import GeneratorError
from protoc_webapi_ts.generator.ts_file import generate
from protoc_webapi_ts.options import GeneratorOptions


def run(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    try:
        options = GeneratorOptions.parse_parameter(request.parameter)
        files = generate(request.proto_file, request.file_to_generate, options)
    except GeneratorError as e:
        # protoc reports the error and fails the build
        response.error = str(e)
        return response

    for name, content in files.items():
        response.file.add(name=name, content=content + "\n")
    return response


def main() -> None:
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = run(request)
    sys.stdout.buffer.write(response.SerializeToString(deterministic=True))


if __name__ == "__main__":
    main()
