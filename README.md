# shopsvc

`shopsvc` is the back-end core of a small online shop, as a library. It has
two areas:

- **Products** (`shopsvc.product`): the product domain model and its review
  workflow, a SQLite store for products, images and audit records, a
  repository that assembles complete products, and a service layer that
  speaks in message objects and RPC-style status codes.
- **Users** (`shopsvc.user`): address and credit-card types, a SQLite store
  for addresses with transaction support, a repository that also fetches
  user profiles through an authentication client you supply, and a service
  layer that checks each address request against the caller's token payload.

Shared helpers live at the top level:

| Module            | What it provides                                                          |
|-------------------|---------------------------------------------------------------------------|
| `shopsvc.config`  | Service name constants and `ConfigCenter`; `resolve_config_center` lets the `config_center` and `config_path` environment variables override it |
| `shopsvc.uuids`   | A nil-aware `UUID` and `NullUUID` with database and JSON conversions, `parse_uuid` and `new_uuid` |
| `shopsvc.token`   | `Payload`, `TokenError` and `extract_payload`                             |
| `shopsvc.auth`    | `new_whitelist_matcher`, `parse_rsa_public_key_from_pem`, `init_jwt_key`  |

## Products

`shopsvc.product.domain` defines `Product`, `ProductStatus`, `AuditAction`,
the request dataclasses, the `ProductRepo` protocol and `ProductUsecase`.
The allowed status changes are:

- draft → pending
- pending → approved or rejected
- rejected → draft

`Product.can_transition_to` says whether a change is allowed, and
`Product.change_status` makes it or raises `ValueError`. `validate_product`
raises `ProductError` for an empty name or a price that is not positive.

`shopsvc.product.store.ProductQueries` wraps a `sqlite3` connection (in
memory by default). Call `create_schema()` first. Products are soft-deleted,
`update_product` only changes a row whose `updated_at` still matches, and
`transaction()` is a context manager that rolls back on any exception.

`shopsvc.product.repository.ProductRepository` builds on it:

- `create_product` stores the product and its images; a failure to store
  images is logged, not raised.
- `update_product` applies the fields that are set and puts the product back
  into draft.
- `submit_for_audit` and `audit_product` write an audit record and update the
  status in one transaction; an unknown audit action raises `ProductError`.
- Products read back carry their price as whole units and their images with
  a sort order of 0.

`shopsvc.product.service.ProductService` takes `ProductMessage` objects and
returns messages. Failures are raised as `RpcError` with a `Code`; known
domain errors map to not-found, failed-precondition or invalid-argument, and
anything else to internal. Rejecting a product without a reason raises an
invalid-argument `RpcError` before the use case is called. `to_message` and
`from_message` convert between messages and domain products.

```python
from shopsvc.product.domain import ProductUsecase
from shopsvc.product.repository import ProductRepository
from shopsvc.product.service import ProductMessage, ProductService
from shopsvc.product.store import ProductQueries

queries = ProductQueries()
queries.create_schema()
service = ProductService(ProductUsecase(ProductRepository(queries)))

created = service.create_product(ProductMessage(name="Mug", price=9.5, stock=3, merchant_id=1))
record = service.submit_for_audit(created.id, 1)
```

## Users

`shopsvc.user.store.AddressQueries` stores addresses in SQLite;
`AddressStore.exec_tx(fn)` runs `fn` with its own queries inside a
transaction. `shopsvc.user.repository.UserRepository` turns rows into
`Address` values. Its `get_profile` needs an `Authorization` value of the
form `Bearer <token>` and an auth client object with a
`get_user_info(authorization)` method; without a client it raises
`ProfileError`.

`shopsvc.user.service.UserService` takes the verified claims of the caller
(a `Payload` or a mapping) as its first argument. Address endpoints raise
`TokenError` unless the request's owner and name match the claims.

## UUIDs

```python
from shopsvc.uuids import new_uuid, parse_uuid

ident = new_uuid()
same = parse_uuid(str(ident.value()))
assert not same.is_nil()
```

A nil UUID is written to the database as `None` and to JSON as `null`;
reading `None`, `"null"` or an empty string back gives a nil UUID.

## What it does not do

- There is no command and no network server; the service classes are plain
  Python objects to call from your own transport.
- It does not talk to a configuration centre, a service registry or a
  tracing backend; `shopsvc.config` only resolves the address and path.
- It does not verify JWTs itself; it loads the RSA key and reads claims that
  something else has verified.
- `UserRepository` does not store credit cards. `UserService.create_credit_card`
  needs a repository that has `create_credit_card`, and the other card
  endpoints return empty replies.
- No authentication client is included.

## Running the tests

The test suite uses pytest and is declared under the `test` extra:

```
pip install -e .[test]
pytest
```