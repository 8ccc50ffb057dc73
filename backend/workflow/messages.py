# Operator-facing messages (pt-BR, as printed by the shop UI).

ITEM_CREATED = "Produto cadastrado com sucesso!"
STOCK_MERGED = "Estoque atualizado com sucesso!"
ITEM_DELETED = "Produto excluído do estoque."

CREATE_CONFLICT = "Erro ao salvar. Verifique se o código já existe."
CREATE_FAILED = "Erro ao salvar o produto. Tente novamente."
MERGE_NOT_FOUND = "Produto não encontrado. Atualize a lista e tente novamente."
MERGE_FAILED = "Erro ao atualizar o estoque. Tente novamente."
DELETE_FAILED = "Erro ao excluir o produto."
CATALOG_FAILED = "Erro ao buscar estoque."

UNKNOWN_ITEM = "Produto não encontrado no estoque."
